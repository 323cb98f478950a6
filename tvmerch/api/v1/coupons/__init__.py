"""Coupons API"""
