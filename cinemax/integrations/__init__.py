"""
External provider integrations (TMDb, OMDb, YouTube).

Clients here only speak HTTP and return provider-native JSON; mapping into the
canonical `Movie` lives in `cinemax.normalize`.
"""
