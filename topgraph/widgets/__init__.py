"""CPU, memory, temperature, disk, network and process widgets, the help menu, the status bar and metrics."""