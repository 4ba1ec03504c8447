"""
CLI entry point using Typer.

Provides commands for previewing and logging advanced techniques:
- list: Technique catalog with engine and simple-mode support
- ladder: Step-by-step weights, targets and rests for a technique
- expand: Virtual sets for the plain set logger
- run: Execute a technique interactively and save the result
- history: Stored executions
- stats: Usage counts and completion rates
- delete-record: Remove a stored execution
"""

from .app import app
from .commands import analysis, execution, techniques  # noqa: F401  (registers commands)

if __name__ == "__main__":
    app()
