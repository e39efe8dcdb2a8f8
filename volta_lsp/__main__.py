from volta_lsp.server import main

main()
