"""
Authentication: login, token issuance and the bearer-token gate.
"""
