"""Bootstrap runtime: process-wide registry, module loading and the step sequence."""
