#!/usr/bin/env python3

from setuptools import setup

setup(name='tillslip',
      version='1.0',
      description='Plain text receipt layout for thermal receipt printers',
      packages=['tillslip'],
      python_requires='>=3.10',
      entry_points={
          'console_scripts': [
              'tillslip = tillslip.main:main',
          ],
      },
      install_requires=[
          "requests",
          "python-dateutil",
          "tomli",
      ],
      extras_require={
          'test': ["pytest"],
      },
)
