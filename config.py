"""
config.py
Runtime configuration for the shallow NNUE evaluator.

Runtime settings can be overridden with environment variables:
- SHALLOW_NNUE_MODEL: path to the TorchScript model
- SHALLOW_NNUE_DEVICE: torch device string ("cpu", "cuda", "cuda:1", ...)
- SHALLOW_NNUE_LOG_LEVEL: logging level name
"""

import os

import torch

PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))

# Network architecture (768 -> HIDDEN_1 -> HIDDEN_2 -> 1)
INPUT_SIZE = 768
HIDDEN_1 = 256
HIDDEN_2 = 32

# Model artifact
DEFAULT_MODEL_PATH = os.environ.get(
    "SHALLOW_NNUE_MODEL",
    os.path.join(PROJECT_DIR, "checkpoints", "shallow-nnue.pt")
)

# Device placement (None = CUDA if available, else CPU)
DEVICE = os.environ.get("SHALLOW_NNUE_DEVICE")

# Logging
LOG_LEVEL = os.environ.get("SHALLOW_NNUE_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# CLI defaults
TOP_MOVES = 10


def get_device() -> torch.device:
    """
    Device for the feature vector and the model.

    Returns:
        DEVICE if set, otherwise CUDA when available, else CPU
    """
    if DEVICE:
        return torch.device(DEVICE)
    return torch.device("cuda" if torch.cuda.is_available() else "cpu")
