"""Build and publish the Exoform WebAssembly client into the server asset directory."""

__version__ = "0.1.0"
