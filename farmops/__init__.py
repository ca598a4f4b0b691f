"""FarmOps backend: ciclo de vida de órdenes de trabajo agrícolas."""
