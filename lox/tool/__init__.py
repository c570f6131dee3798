# Development tools for the Lox package.
