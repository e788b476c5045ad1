"""
Trading use cases: order and delegation payload building, custody
placement, delegation status, market listing and trade history.
"""
