"""
Export Layer - Report Output

CSV rendering of tabular rows and local file storage for exports.
"""
