__version__ = '5.7.2'
