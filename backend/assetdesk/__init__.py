"""
AssetDesk - IT asset register and support ticketing API.
"""
