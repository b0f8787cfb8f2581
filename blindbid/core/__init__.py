"""Auction engine, clock, payments and deployment"""
