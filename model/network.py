"""
network.py
Shallow NNUE-style evaluation network.

Architecture:
    Input [768] or [B, 768] sparse board features
    → Linear 768 → 256, clipped ReLU
    → Linear 256 → 32, clipped ReLU
    → Linear 32 → 1 (scalar score, side-to-move perspective)
"""

import os

import torch
import torch.nn as nn

import config


class ShallowNet(nn.Module):
    """
    Three-layer perceptron over the 768 binary features.

    Input: [768] or [B, 768]
    Output: [1] or [B, 1]
    """

    def __init__(self, hidden_1: int = config.HIDDEN_1, hidden_2: int = config.HIDDEN_2):
        """
        Args:
            hidden_1: Width of the feature transformer layer
            hidden_2: Width of the second hidden layer
        """
        super(ShallowNet, self).__init__()

        self.hidden_1 = hidden_1
        self.hidden_2 = hidden_2

        self.feature_fc = nn.Linear(config.INPUT_SIZE, hidden_1)
        self.hidden_fc = nn.Linear(hidden_1, hidden_2)
        self.output_fc = nn.Linear(hidden_2, 1)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Args:
            x: Feature vector(s) [768] or [B, 768]

        Returns:
            Score tensor [1] or [B, 1]
        """
        # Clipped ReLU keeps activations in [0, 1] like quantised NNUE layers
        x = torch.clamp(self.feature_fc(x), 0.0, 1.0)
        x = torch.clamp(self.hidden_fc(x), 0.0, 1.0)
        return self.output_fc(x)


def count_parameters(model: nn.Module) -> int:
    """
    Count trainable parameters in model.

    Args:
        model: PyTorch model

    Returns:
        Number of trainable parameters
    """
    return sum(p.numel() for p in model.parameters() if p.requires_grad)


def export_torchscript(model: nn.Module, path: str) -> str:
    """
    Script ``model`` and save it where TorchScriptOracle.load() can read it.

    Args:
        model: Network to export (switched to eval mode)
        path: Destination .pt file; parent directories are created

    Returns:
        The path written
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    model.eval()
    scripted = torch.jit.script(model)
    scripted.save(path)
    return path
