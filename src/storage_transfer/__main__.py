from storage_transfer.cli import main

main()
