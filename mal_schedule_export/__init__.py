"""
Export the MyAnimeList weekly anime schedule to JSON / CSV / ICS, or serve it over HTTP.
"""
__version__ = "0.1.0"
