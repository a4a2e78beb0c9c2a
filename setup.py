from setuptools import setup

setup(
	name='nvpowermizerd',
	version='1.0.0',
	description='A daemon to improve nVidia PowerMizer mode behavior',
	packages=['nvpowermizerd'],
	package_dir={'':'src'},
	install_requires=[
		'python-xlib',
	],
	extras_require={
		'test': [
			'pytest',
		],
	},
	entry_points={
		'console_scripts': [
			'nvpowermizerd=nvpowermizerd:main',
		]
	}
)
