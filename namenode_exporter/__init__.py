"""Prometheus exporter for HDFS NameNode JMX metrics."""

__version__ = "0.1.0"
