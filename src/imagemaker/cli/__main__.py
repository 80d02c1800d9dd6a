"""Command-line entry point for the med-imagemaker package.

The package ships a single command, ``imagemaker``, which makes one blank
image volume per invocation. Run ``imagemaker --help`` for its options, or
``python -m imagemaker.cli``.
"""

from .imagemaker import imagemaker as cli

if __name__ == "__main__":
    cli()
