"""Hotel Suite back end"""
