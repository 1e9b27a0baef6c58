"""
Maintenance scripts, run with python -m assetdesk.scripts.<name>.
"""
