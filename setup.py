from setuptools import setup, find_packages


setup(
    name='iterable-weakset',
    description='An insertion-ordered, iterable set that only weakly references its elements.',
    keywords='weakref weakset iterable ordered',
    python_requires='>=3.7',
    setup_requires=['setupmeta>=3.0'],
    install_requires='@requirements.txt',
    extras_require={'test': '@requirements_test.txt'},
    packages=find_packages(exclude=['tests', 'tests.*']),
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.7',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
