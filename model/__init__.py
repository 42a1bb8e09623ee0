"""
model package
Shallow evaluation network, TorchScript oracle and incremental evaluator.
"""

from model.network import ShallowNet, count_parameters, export_torchscript
from model.oracle import TorchScriptOracle, OracleError, OracleLoadError, OracleEvaluationError
from model.evaluator import NNUEEvaluator

__all__ = [
    'ShallowNet', 'count_parameters', 'export_torchscript',
    'TorchScriptOracle', 'OracleError', 'OracleLoadError', 'OracleEvaluationError',
    'NNUEEvaluator',
]
