"""Well-known system account ids (seeded by migration 007)."""

# Holds every staked unit until it is paid out by a claim. Platform fees
# stay here after claims.
CUSTODY_ACCOUNT_ID = "MARKET_CUSTODY"
