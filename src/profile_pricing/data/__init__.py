"""Data subpackage - packaged seed catalog."""
