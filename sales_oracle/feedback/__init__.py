"""
Seller feedback: deterministic five-block coaching texts.

Modules
-------
templates : generate_feedback() — title plus technical reading, operational
            diagnosis, impact, direction and closing line for one seller.
"""
