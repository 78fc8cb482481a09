#!/usr/bin/env python3
"""
Retail POS - Main Application Entry Point
"""

import os

from retail_pos.main import create_app

app = create_app()

if __name__ == '__main__':
    # Run the application
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=False)
