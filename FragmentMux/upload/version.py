__title__ = 'FragmentMux'
__version__ = '1.0.0'
__description__ = 'Fragment merging and deterministic multiplexer command building'
