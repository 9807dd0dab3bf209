"""Homestays app package.

Holds the listings guests can book (``Homestay``) and the discount codes
they can apply (``Promotion``). Listing management itself is plain CRUD;
the booking engine only reads these records.
"""
