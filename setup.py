#!/usr/bin/env python

from setuptools import setup, find_packages

with open('twoport/__init__.py') as fid:
    for line in fid:
        if line.startswith('__version__'):
            VERSION = line.strip().split()[-1][1:-1]
            break

LONG_DESCRIPTION = """
	twoport computes reflection coefficients, power gains and stability factors of two-port networks for amplifier design, implemented in the Python programming language.
"""
setup(name='twoport',
	version=VERSION,
	license='new BSD',
	description='Two-port amplifier figures of merit from S-parameters',
	long_description=LONG_DESCRIPTION,
	packages=find_packages(include=['twoport', 'twoport.*']),
	python_requires='>=3.9',
	install_requires = [
		'numpy',
		],
	extras_require={
		'test': ['pytest'],
		},
	package_dir={'twoport':'twoport'},
	include_package_data = True,
	)
