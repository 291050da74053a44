"""Saving a checkpoint and exiting when the scan is interrupted."""

from __future__ import annotations

import signal
import sys
from types import FrameType

from subdomainx.checkpoint import Checkpoint, CheckpointError, save_checkpoint


class SignalHandler:
    """On SIGINT or SIGTERM, records the interruption in the checkpoint, saves it and exits."""

    def __init__(self, checkpoint: Checkpoint | None, output_dir: str) -> None:
        self.checkpoint = checkpoint
        self.output_dir = output_dir
        self.interrupted = False

    def start(self) -> None:
        """Install the handler for SIGINT and SIGTERM."""
        signal.signal(signal.SIGINT, self.handle)
        signal.signal(signal.SIGTERM, self.handle)

    def handle(self, signum: int, frame: FrameType | None) -> None:
        """Save the checkpoint and exit with status 1."""
        try:
            name = signal.Signals(signum).name
        except ValueError:
            name = str(signum)
        print(f"\n\n⚠️  Received signal {name}. Saving checkpoint and shutting down gracefully...")
        self.interrupted = True

        if self.checkpoint is not None:
            self.checkpoint.mark_error("Scan interrupted by user")
            try:
                save_checkpoint(self.checkpoint, self.output_dir)
            except CheckpointError as exc:
                print(f"❌ Failed to save checkpoint: {exc}")
            else:
                scan_id = self.checkpoint.scan_id
                print(f"✅ Checkpoint saved: {scan_id}_checkpoint.json")
                print(f"💡 Resume with: subdomainx --resume {scan_id}")

        sys.exit(1)