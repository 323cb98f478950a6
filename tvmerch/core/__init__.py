"""Application core: settings, database, security and error handling"""
