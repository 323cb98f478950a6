"""Admin panel API"""
