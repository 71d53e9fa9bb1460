"""
                Restaurant Order Tracker

Backend for waitstaff: record which meal a table ordered, see what is
still outstanding and clear orders once they are served.
"""

__version__ = "1.0.0"
