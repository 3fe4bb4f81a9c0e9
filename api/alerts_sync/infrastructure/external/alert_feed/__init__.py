"""
Cliente del feed publico de historial de alertas.

Solo lectura; el feed es autoritativo para los campos de las alertas que
sigue reportando.
"""
