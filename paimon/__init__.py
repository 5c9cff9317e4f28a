"""Paimon: Discord relay to Gemini with Groq failover."""
