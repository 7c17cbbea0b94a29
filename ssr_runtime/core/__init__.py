"""
Core SSR module instantiation: module objects, the sandbox and the loader.
"""
