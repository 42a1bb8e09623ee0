"""
oracle.py
Scalar position evaluation from a TorchScript model.

The oracle only sees the 768-wide feature tensor; it knows nothing about
boards or moves.
"""

import logging
import os
from typing import Optional

import torch

import config
from encoding.state import FEATURE_SIZE

logger = logging.getLogger(__name__)


class OracleError(RuntimeError):
    """Base class for evaluator failures."""


class OracleLoadError(OracleError):
    """Raised when a model file is missing or cannot be loaded."""


class OracleEvaluationError(OracleError):
    """Raised when a forward pass fails or gets a malformed input."""


class TorchScriptOracle:
    """
    Loaded TorchScript evaluator.

    Usage:
        oracle = TorchScriptOracle.load("checkpoints/shallow-nnue.pt")
        score = oracle(features)
    """

    def __init__(self, module: torch.nn.Module, device: Optional[torch.device] = None):
        """
        Args:
            module: Scripted (or plain) module mapping [768] -> scalar
            device: Device to run on (default: config.get_device())
        """
        self.device = torch.device(device) if device is not None else config.get_device()
        self.module = module.to(self.device)
        self.module.eval()

    @classmethod
    def load(cls, path: str, device: Optional[torch.device] = None) -> 'TorchScriptOracle':
        """
        Load a TorchScript model from disk.

        Args:
            path: Path to the saved TorchScript file
            device: Device to run on (default: config.get_device())

        Returns:
            Ready-to-use oracle in eval mode

        Raises:
            OracleLoadError: File missing or not a valid TorchScript archive
        """
        device = torch.device(device) if device is not None else config.get_device()
        expanded_path = os.path.expanduser(path)
        if not os.path.exists(expanded_path):
            raise OracleLoadError(f"Model file not found: {expanded_path}")

        try:
            module = torch.jit.load(expanded_path, map_location=device)
        except (RuntimeError, ValueError) as e:
            raise OracleLoadError(f"Could not load TorchScript model {expanded_path}: {e}") from e

        logger.info(f"Loaded model {expanded_path} on {device}")
        return cls(module, device=device)

    def __call__(self, features: torch.Tensor) -> float:
        """
        Score one encoded position.

        Args:
            features: Tensor of shape [768]

        Returns:
            First element of the model output as float

        Raises:
            OracleEvaluationError: Wrong input shape or failing forward pass
        """
        if features.shape != (FEATURE_SIZE,):
            raise OracleEvaluationError(f"Expected features of shape ({FEATURE_SIZE},), got {tuple(features.shape)}")

        try:
            with torch.no_grad():
                output = self.module(features.to(self.device))
            return float(output.reshape(-1)[0].item())
        except (RuntimeError, IndexError) as e:
            raise OracleEvaluationError(f"Model forward pass failed: {e}") from e
