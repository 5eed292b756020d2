"""Application core: configuration, constants, logging, tracing."""
