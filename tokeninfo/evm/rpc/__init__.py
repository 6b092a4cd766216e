from .evm_rpc_client import EvmCallReverted, EvmRpcClient, EvmRpcError

__all__ = ["EvmCallReverted", "EvmRpcClient", "EvmRpcError"]
