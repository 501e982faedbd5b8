from setuptools import setup

setup(
    name='sag2ld',
    version='0.1dev',
    packages=['sag2ld', 'sag2ld.outputs'],
    install_requires=[
        'toml>=0.10'
    ],
    extras_require={
        'test': ['pytest']
    },
    python_requires='>=3.6',
    entry_points={
        'console_scripts': [
            'sag2ld=sag2ld.__main__:main'
        ]
    })
