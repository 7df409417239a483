"""Guardian chain watchers.

Watchers follow a remote ledger node, reconstruct cross-chain message
publications from on-chain events and hand them to the signing pipeline.
"""
