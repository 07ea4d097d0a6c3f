"""
Chain - On-chain interaction layer for the Inpayment SDK.

Provides JSON-RPC client, ABI management, and transaction utilities
for the registry, payment, vesting, ERC20 and price feed contracts.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
