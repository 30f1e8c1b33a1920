"""An interactive REPL for Rust that recompiles the whole session per input."""

version = '0.1.0'
