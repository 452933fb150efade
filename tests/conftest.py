import matplotlib

# never open a window while testing
matplotlib.use('Agg')
