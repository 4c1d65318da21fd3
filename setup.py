from setuptools import setup

setup(
    name='asyncio-apns-binary',
    version='0.1.0',
    install_requires=[],
    extras_require={
        'test': ['pytest>=7', 'pytest-asyncio>=0.21'],
    },
    python_requires='>=3.8',
    packages=['asyncio_apns_binary'],
    url='https://github.com/etataurov/asyncio-apns',
    license='MIT',
    author='etataurov',
    author_email='tatauroff@gmail.com',
    description='asyncio client for the binary interface of Apple Push Notification Service'
)
