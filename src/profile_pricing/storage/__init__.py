"""Storage subpackage - repository interfaces and in-memory implementations."""
