"""Face Matcher Application Layer"""
