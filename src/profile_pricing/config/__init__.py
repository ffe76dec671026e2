"""Configuration subpackage - settings and logging."""
