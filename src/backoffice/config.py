"""Runtime configuration, read from the environment."""

from __future__ import annotations

import os
from pathlib import Path


class Config:

    def __init__(self) -> None:
        self.DATA_DIR = Path(os.environ.get("BACKOFFICE_DATA_DIR", "data"))
        self.LOG_LEVEL = os.environ.get("BACKOFFICE_LOG_LEVEL", "WARNING").upper()

        # "allow_list" lets staff set any POS status by hand; "transition_graph"
        # restricts POS orders to the forward workflow.
        self.POS_STATUS_POLICY = os.environ.get("BACKOFFICE_POS_STATUS_POLICY", "allow_list")

        self.DEFAULT_STATE = os.environ.get("BACKOFFICE_DEFAULT_STATE", "Huila")
        self.DEFAULT_COUNTRY = os.environ.get("BACKOFFICE_DEFAULT_COUNTRY", "Colombia")
        self.EMAIL_SENDER = os.environ.get("BACKOFFICE_EMAIL_SENDER", "pedidos@localhost")

    @property
    def outbox_dir(self) -> Path:
        return self.DATA_DIR / "outbox"
