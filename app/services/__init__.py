# Application services package
