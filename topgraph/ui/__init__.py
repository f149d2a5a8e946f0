"""Character-cell drawing: buffers, blocks, gauges, line graphs, sparklines, tables and text entries."""