"""tillslip

Lay out point of sale orders as plain text receipts for character-mode
thermal printers on 58mm and 80mm paper.

"""

__all__ = ['cmdline', 'config', 'layout', 'loader', 'main', 'models',
           'paper', 'startup', 'version']
