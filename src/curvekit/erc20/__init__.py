from .allowance import AllowanceManager, WalletSnapshot, approve_request, balance_reads

__all__ = ("AllowanceManager", "WalletSnapshot", "approve_request", "balance_reads")
