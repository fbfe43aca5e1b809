"""
Entry point for the administrative CLI.
This allows running commands with `python -m molino_store command=stats`.
"""

import sys

import hydra
from omegaconf import DictConfig

from .admin import run_command


@hydra.main(version_base=None, config_path="../../config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Run an administrative command with Hydra configuration.

    Args:
        cfg: Configuration from Hydra
    """
    if not run_command(cfg):
        sys.exit(1)


if __name__ == "__main__":
    main()
