"""Value and record converters used with ValueConverterStep and ConverterStep."""
