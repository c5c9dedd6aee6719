"""holders_sync: keep the holders logger registry and the DOOP bridge in step with
on-chain activity reported by Alchemy Notify webhooks.

The HTTP app verifies each webhook, reconciles it against current balances and
issues at most one corrective transaction per event.
"""

__version__ = "0.1.0"
