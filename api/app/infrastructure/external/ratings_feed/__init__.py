"""
Pipeline de sincronización one-way: feed de ratings -> tabla `items`.

Estrategia full refresh: cada corrida reemplaza el dataset completo.

Piezas:
- feed_client: recorre el feed paginado hasta agotarlo (Paginator).
- refresher: asegura la tabla, la vacía y carga el lote nuevo (Refresher).
- run_guard: single-flight por proceso para no solapar corridas.

La secuencia (y el manejo de estados) vive en
`app.application.use_cases.sync_use_cases`.
"""
