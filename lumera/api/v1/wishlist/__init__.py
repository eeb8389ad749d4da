"""Wishlist API package"""
