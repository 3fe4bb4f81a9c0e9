"""
Store del dataset de alertas: CSV dentro de un repositorio git remoto.
"""
