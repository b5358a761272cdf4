from signatureapp.server import main

main()
